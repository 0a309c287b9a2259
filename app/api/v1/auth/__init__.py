"""Authentication: JWT sessions in cookies or bearer headers, and admin user management"""
