"""
CriptoPlay — crypto paper-trading platform.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - accounts: Registration, sessions, profile, subscription and premium access.
    - trading: Spot simulator, leveraged futures, capital movements, reports.
    - ranking: Live leaderboard, monthly ranking close, hall of fame.
    - alerts: Price alerts and their email notifications.
    - budget: Yearly personal budget by category.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (DB, exchange APIs, email, scheduler) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
