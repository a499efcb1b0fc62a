# Routes package init
"""
VetClinic Backend — API Routes Package
========================================

Route Inventory:
    - patients.py:      /api/pacientes, /api/paciente/...   (auth required)
    - veterinarians.py: /api/registro, /api/login, /api/perfil, /api/veterinario/...
    - health.py:        GET /  (liveness text), GET /health

API documentation (/api/docs, /api/docs.json) is configured in main.py
and built by docs.py.

Routes stay thin: pull data from the request, call a service, return
its result. Business rules live in services/.
"""
