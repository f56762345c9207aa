# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import identity_provider
from api_responses import metrics, get_header, missing_parameters, service_response

from aws_lambda_powertools import Logger
from aws_lambda_powertools import Tracer
logger = Logger()
tracer = Tracer()

''' Signs the user in and returns the Cognito id, access and refresh tokens '''
@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler(capture_response=False)
def lambda_handler(event, context):

    username = get_header(event, 'username')
    password = get_header(event, 'password')

    if username is None or password is None:
        logger.info("Username and password are required")
        return missing_parameters('username', 'password')

    logger.append_keys(username=username)
    logger.info("Sign in requested")

    auth_result = identity_provider.sign_in(username, password)
    if not auth_result['successful']:
        logger.info("Sign in failed", error_type=auth_result['errorType'])

    return service_response(auth_result)
