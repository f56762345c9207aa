# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import identity_provider
from api_responses import metrics, get_header, missing_parameters, service_response

from aws_lambda_powertools import Logger
from aws_lambda_powertools import Tracer
logger = Logger()
tracer = Tracer()

# Registers a new user. The username doubles as the email address of the user
@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler
def lambda_handler(event, context):

    username = get_header(event, 'username')
    password = get_header(event, 'password')

    if username is None or password is None:
        logger.info("Username and password are required")
        return missing_parameters('username', 'password')

    logger.append_keys(username=username)
    logger.info("Signing up a new user")

    return service_response(identity_provider.sign_up(username, password))
