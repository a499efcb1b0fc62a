# Services package init
"""
VetClinic Backend — Services Layer
====================================

Service Inventory:
    - PatientService: list/detail/create/update/delete of patients, scoped
      to the authenticated veterinarian
    - VeterinarianService: registration, login, profile, password change
    - security: bcrypt password hashing and JWT bearer tokens

Services receive the DocumentStore in their constructor and raise
exceptions from vetclinic.exceptions; they never build HTTP responses.
"""
