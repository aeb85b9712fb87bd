"""
Shared query parameter definitions for API endpoints.
"""

from fastapi import Query

# Query parameter dependencies for common validations
LimitParam = Query(100, ge=1, le=1000, description="Maximum items to return")
SkipParam = Query(0, ge=0, le=100000, description="Number of items to skip")
PublishedParam = Query(None, description="Only blogs with this published state")
CategoryParam = Query(None, max_length=100, description="Blog category filter")
