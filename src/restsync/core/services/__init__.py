"""Services of the sync core.

Why:
- Path resolution, request building, state transitions and reconciliation
  are pure logic over the domain; I/O goes through the interfaces.
"""
