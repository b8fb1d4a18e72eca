"""Table availability and overlap detection for restaurant bookings."""
