"""
Organization-scoped role based access control.

Roles are labels on memberships; each role maps to a fixed set of
permissions. Every mutating operation passes through AuthorizationGuard.
"""
