"""
Portfolio Backend: Application Package
========================================

Backend API for a personal portfolio site: public reviews, project cards,
a contact-form relay to the owner's inbox, and bearer-token login.

Architecture Note:
    ┌─────────────────────────────────────┐
    │  Routes (HTTP: status codes, bodies)│
    ├─────────────────────────────────────┤
    │  Services (secrets, policy, mail)   │
    ├─────────────────────────────────────┤
    │  PersistenceGateway / MailTransport │
    ├─────────────────────────────────────┤
    │  SQLAlchemy engine │ SMTP / SendGrid│
    └─────────────────────────────────────┘

    Every component below the routes is built once by main.create_app()
    and reaches handlers through FastAPI dependencies.
"""

__version__ = "1.0.0"
