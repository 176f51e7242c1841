"""
AliExpress product lookup and affiliate offer generation service.
"""
