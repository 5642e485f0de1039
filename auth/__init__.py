"""
auth — User authentication module.

Provides:
  • Signed access token creation & verification
  • Password hashing (bcrypt)
  • Signup / Signin API routes
  • ``get_current_user_id`` FastAPI dependency
"""
