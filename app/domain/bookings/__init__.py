"""Bookings domain - lifecycle, mutation rules and listing"""
