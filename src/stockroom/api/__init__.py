"""API module for Stockroom.

api layer:
- Authenticates the user and checks license permissions
- Sanitizes inputs and shapes JSON responses
- Forbidden: direct vendor HTTP calls, file IO (gateway and media do that)
"""
