"""
Subscriptions module - license activation and subscription validity.

This module handles:
- Cluster identity resolution
- Activation key acknowledgment against the licensing service
- Signature verification of license payloads
- Process-wide subscription state and validity checks
"""
