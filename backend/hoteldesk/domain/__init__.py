"""
hoteldesk/domain/ - pure front-desk rules shared by the API and the console
"""
