"""
Scheduling core: pure functions behind the cycle, booking and waitlist
services.

Nothing in this package touches the database.  Services load rows,
hand them to these functions and persist the results.
"""
