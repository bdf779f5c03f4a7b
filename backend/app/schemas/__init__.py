# Schemas package init
"""
VisitorBook Backend: Pydantic API Schemas
===========================================

Request/response contracts, kept separate from the ORM models so the API
shape can change independently of the table layout.
"""
