# Services package init
"""
Portfolio Backend: Services Layer
===================================

Service Inventory:
    - PersistenceGateway: the only component that talks to the database
    - MailTransport (abstract): outbound mail capability
    - SMTPMailer / SendGridMailer: concrete transports, picked by build_mailer()
    - ReviewService: shared-secret check, then insert
    - ContactService: contact policy, recipient check, message formatting
    - AuthService: credential login, token issue and verification
"""
