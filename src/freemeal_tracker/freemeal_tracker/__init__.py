"""Free Meal Tracker package.

RFID kiosk + admin back-office for daily free meal claims. Organized by
feature modules (people, claims, members, reports, users) with a thin Flask
controller layer over service/repository layers.
"""
