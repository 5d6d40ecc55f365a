"""Users app package.

Defines the email-based custom user model with the GUEST/HOST/ADMIN
roles and the JWT authentication endpoints. Use ``apps.users.models.User``
as the AUTH_USER_MODEL throughout the project.
"""
