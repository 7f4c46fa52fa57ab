"""Cross-domain services - notifications, audit logging and status automation"""
