"""PRS Online.

This package contains the backend of the PRS Online administration site: user
accounts and the upcoming review notice workflow for practice reviews.

High-level architecture
-----------------------

- ``prs_online.core``:

  - Logging and monitoring setup.
  - Password hashing and token helpers.
  - SQLModel entities and async repositories for the relational schema.

- ``prs_online.server``:

  - The FastAPI application, its configuration and middleware.
  - The GraphQL schema (users, notices) and the media upload endpoint.
  - Request-scoped services that hold the business rules.

Notice workflow
---------------

An upcoming review notice moves through three stages:

1. ``GenerateNotices``: the notice HTML is generated (and regenerated) for a
   monthly batch and each notice is reviewed.
2. ``ApproveNotices``: reviewed notices are released for approval and
   reviewed again by an approver.
3. ``Approved``: approved notices leave the workflow.
"""
