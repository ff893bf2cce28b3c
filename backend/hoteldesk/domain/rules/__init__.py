"""
hoteldesk/domain/rules/ - front-desk business rules

- guest_rules: phone / CNIC / date-range validation
- season_rules: owner season detection and quota accounting
- billing_rules: nights, invoice totals, interval overlap
"""
