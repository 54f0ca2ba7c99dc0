"""
Shadow Ledger Services Package - account, ownership and document rules.

Core Services:
- auth_service: signup, login and stateless session tokens
- authorization: ownership gate in front of every book and entry access
- book_service: profile and spreadsheet book lifecycle
- entry_service: tagged entries attached to books
"""
