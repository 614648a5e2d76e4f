"""internships/ -- Listings, applications, and feedback for InternHub.

Layer rule: internships/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or auth/. Entities reference users by id only.
"""
