"""Admin domain - back-office routes over bookings and users"""
