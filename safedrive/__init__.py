"""SafeDrive peer-to-peer vehicle rental backend"""
