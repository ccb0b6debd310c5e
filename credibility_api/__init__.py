"""
Credibility API Service.

A small REST service that lets users cast a single positive or negative
credibility vote on another user and query the current tally.

The service allows users to:
- Vote on another user's credibility (one vote per voter/target pair)
- Change their vote from positive to negative or back
- Retrieve positive/negative counts and their own recorded vote
"""

__version__ = "0.1.0"
