"""
Services package - one module per area of the gym dashboard.

Routes import the singleton getters directly from each module
(e.g. ``from service_modules.member_service import get_member_service``).
"""
