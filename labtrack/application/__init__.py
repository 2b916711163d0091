"""
Application layer - Use cases, DTOs, and the usage monitor.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services inside one unit of work
3. Running the periodic usage dashboard refresh

Use cases are the only entry point for API handlers that mutate state.
"""
