"""
Common Error Constants

Centralized error messages shared by the cart engine and the HTTP layer.
"""

# Cart errors
ERROR_INVALID_ITEM = "Invalid cart item"
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer within the allowed range"
ERROR_INVALID_PRICE = "Price must be a non-negative number within the allowed range"

# Storage errors
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"
ERROR_CORRUPTED_RECORD = "Corrupted cart record"
