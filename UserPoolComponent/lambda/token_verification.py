# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import json
import os
import time

import jwt
import requests
from jwt.algorithms import RSAAlgorithm

from aws_lambda_powertools import Logger
logger = Logger()

# Cognito configuration
region_name = os.environ.get('REGION_NAME') or os.environ.get('AWS_REGION')
user_pool_id = os.environ.get('COGNITO_USER_POOL_ID')
token_issuer = f"https://cognito-idp.{region_name}.amazonaws.com/{user_pool_id}"
jwks_url = f"{token_issuer}/.well-known/jwks.json"

# Public keys are cached between requests for 10 hours unless a token shows up with an unknown kid
jwks_cache_ttl = int(os.environ.get('JWKS_CACHE_TTL', 36000))
jwks_request_timeout = 3
# Unknown kids trigger a refetch at most once a minute
jwks_min_refresh_interval = 60

# Current key set from the Cognito JWKS endpoint
jwks_key_set = None
last_jwks_refresh = 0


class TokenValidationError(Exception):
    """Raised when a token can't be checked at all (malformed, unknown key, JWKS unavailable)."""


def clear_jwks_cache():
    global jwks_key_set, last_jwks_refresh
    jwks_key_set = None
    last_jwks_refresh = 0


def refresh_jwks_key_set():
    global jwks_key_set, last_jwks_refresh
    logger.info("Refreshing JWKS key set", jwks_url=jwks_url)
    try:
        response = requests.get(jwks_url, timeout=jwks_request_timeout)
        response.raise_for_status()
        key_set = response.json()
    except (requests.RequestException, ValueError) as e:
        raise TokenValidationError(f"Error fetching JWKS: {e}") from e

    if 'keys' not in key_set:
        raise TokenValidationError("JWKS document has no keys")

    jwks_key_set = key_set
    last_jwks_refresh = int(time.time())


def find_key(kid):
    if jwks_key_set is None:
        return None
    for key in jwks_key_set['keys']:
        if key.get('kid') == kid:
            return key
    return None


def get_jwks_key_with_kid(kid):
    refreshed = False
    if jwks_key_set is None or int(time.time()) - last_jwks_refresh > jwks_cache_ttl:
        refresh_jwks_key_set()
        refreshed = True

    key = find_key(kid)
    if key is None and not refreshed and int(time.time()) - last_jwks_refresh > jwks_min_refresh_interval:
        # The pool may have rotated its keys since the last fetch
        logger.info("kid not in cached JWKS key set, refreshing the keys", kid=kid)
        refresh_jwks_key_set()
        key = find_key(kid)
    return key


def is_token_valid(token):
    """Verifies the RS256 signature, issuer and expiry of a Cognito token.

    Returns False when the token doesn't verify. Raises TokenValidationError
    when it can't be checked: malformed token, no kid, no matching public key
    or the JWKS endpoint can't be reached.
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except jwt.DecodeError as e:
        raise TokenValidationError(f"Malformed token: {e}") from e

    kid = unverified_header.get('kid')
    if not kid:
        raise TokenValidationError("Token header has no kid")

    jwk = get_jwks_key_with_kid(kid)
    if jwk is None:
        raise TokenValidationError(f"Public key {kid} not found in JWKS")

    try:
        public_key = RSAAlgorithm.from_jwk(json.dumps(jwk))
    except jwt.InvalidKeyError as e:
        raise TokenValidationError(f"Public key {kid} is not a usable RSA key: {e}") from e

    try:
        jwt.decode(
            token,
            public_key,
            algorithms=['RS256'],
            issuer=token_issuer,
            options={"require": ["exp", "iss"], "verify_aud": False}
        )
    except jwt.InvalidTokenError as e:
        logger.info("Token verification failed", reason=str(e))
        return False

    return True


def get_username(id_token):
    try:
        claims = jwt.decode(id_token, options={"verify_signature": False})
    except jwt.DecodeError as e:
        raise TokenValidationError(f"Malformed token: {e}") from e

    # Id tokens carry cognito:username, access tokens carry username
    username = claims.get('cognito:username') or claims.get('username')
    if not username:
        raise TokenValidationError("Token has no username claim")
    return username
