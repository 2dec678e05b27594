"""
authcore - credential verification and session token issuance.
"""
