"""
Inventory Auth API
Session gate, profile management and unseen-item notifications for the
inventory dashboard, backed by Supabase.
"""

__version__ = "1.0.0"
