# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import json
import os
import time
import uuid
from dataclasses import dataclass

# The function modules read their configuration at import time, like on a Lambda cold start
os.environ['AWS_REGION'] = 'eu-west-1'
os.environ['AWS_DEFAULT_REGION'] = 'eu-west-1'
os.environ['REGION_NAME'] = 'eu-west-1'
os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
os.environ['COGNITO_USER_POOL_ID'] = 'eu-west-1_TestPool1'
os.environ['COGNITO_APP_CLIENT_ID'] = 'testappclientid'
os.environ['AWS_LAMBDA_FUNCTION_NAME'] = 'user-pool-test'
os.environ['POWERTOOLS_SERVICE_NAME'] = 'user_pool'
os.environ['POWERTOOLS_METRICS_NAMESPACE'] = 'UserPoolComponentTests'
os.environ['POWERTOOLS_TRACE_DISABLED'] = 'true'

import jwt
import pytest
import requests
from botocore.stub import Stubber
from jwcrypto import jwk
from jwt.algorithms import RSAAlgorithm

import identity_provider
import token_verification

ISSUER = "https://cognito-idp.eu-west-1.amazonaws.com/eu-west-1_TestPool1"


@dataclass
class LambdaContext:
    function_name: str = "user-pool-test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:eu-west-1:123456789012:function:user-pool-test"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"


class FakeJwksResponse:

    def __init__(self, document, status_code=200):
        self.document = document
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.document


def generate_signing_key():
    key = jwk.JWK.generate(kty='RSA', size=2048, alg='RS256', use='sig', kid=str(uuid.uuid4()))
    return key.export_private(), json.loads(key.export_public())


def sign_token(private_key, claims, kid=None):
    key_dict = json.loads(private_key)
    signing_key = RSAAlgorithm.from_jwk(private_key)
    return jwt.encode(claims, signing_key, algorithm="RS256", headers={"kid": kid or key_dict["kid"]})


def id_token_claims(username="jane@example.com", **overrides):
    now = int(time.time())
    claims = {
        "sub": str(uuid.uuid4()),
        "aud": "testappclientid",
        "iss": ISSUER,
        "token_use": "id",
        "cognito:username": username,
        "email": username,
        "iat": now,
        "auth_time": now,
        "exp": now + 3600
    }
    claims.update(overrides)
    return claims


@pytest.fixture(scope="session")
def signing_key():
    return generate_signing_key()


@pytest.fixture(scope="session")
def other_signing_key():
    return generate_signing_key()


@pytest.fixture
def make_token(signing_key):
    private_key, _ = signing_key

    def _make_token(username="jane@example.com", **overrides):
        return sign_token(private_key, id_token_claims(username, **overrides))

    return _make_token


@pytest.fixture(autouse=True)
def empty_jwks_cache():
    token_verification.clear_jwks_cache()
    yield
    token_verification.clear_jwks_cache()


@pytest.fixture
def jwks_endpoint(monkeypatch, signing_key):
    ''' Serves the public signing key from the JWKS url and records the requests made '''
    _, public_key = signing_key
    endpoint = {"keys": [public_key], "requests": [], "status_code": 200}

    def fake_get(url, timeout=None):
        endpoint["requests"].append(url)
        return FakeJwksResponse({"keys": endpoint["keys"]}, endpoint["status_code"])

    monkeypatch.setattr(token_verification.requests, "get", fake_get)
    return endpoint


@pytest.fixture
def cognito_stub():
    with Stubber(identity_provider.client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def lambda_context():
    return LambdaContext()
