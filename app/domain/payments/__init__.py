"""Payments domain - payment records against bookings"""
