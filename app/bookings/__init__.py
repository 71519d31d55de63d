"""
Bookings app.

Holds the booking records created by the scheduling flow. The payment core
only reads them: the cancellation policy needs the scheduled date and time,
and paid payments are linked to the booking they paid for.
"""
