"""
marketplace.api.routers

HTTP routers (auth, ads, health).
"""
