"""Bookings app package.

The booking store, the availability checker and the booking lifecycle
(create, update, confirm, complete, cancel). Overlapping active stays on
one property are prevented by a per-property lock, a row lock on the
property and, on PostgreSQL, an exclusion constraint.
"""
