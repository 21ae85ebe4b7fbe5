"""Core protocol logic, independent of any application framework.

Module Structure:
    - api/          : Guardian API client, typed requests, transport
    - keys.py       : RSA JWK encoding and RS256 challenge assertions
    - validators.py : Configuration validation (base URL, timeouts)

Public APIs:
    Keys (guardian.core.keys):
        - create_jwk()
        - create_challenge_claims()
        - sign_jwt()
        - sign()

    API client (guardian.core.api):
        - GuardianAPIClient / GuardianAPIClient.Builder
        - DeviceAPIClient
        - GuardianAPIRequest, Request, DeviceTokenRequest
        - GuardianError and subclasses
"""
