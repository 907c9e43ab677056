"""
Clinic Appointment API

A FastAPI backend for a clinic: patient self-registration, admin and doctor
accounts, appointment booking with an admin-managed status, and a contact
message inbox. Patients and admins hold independent cookie sessions.
"""

__version__ = "1.0.0"
