# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import identity_provider
from api_responses import metrics, get_header, missing_parameters, service_response

from aws_lambda_powertools import Logger
from aws_lambda_powertools import Tracer
logger = Logger()
tracer = Tracer()

@metrics.log_metrics
@tracer.capture_lambda_handler
def lambda_handler(event, context):

    username = get_header(event, 'username')
    password = get_header(event, 'password')
    confirmation_code = get_header(event, 'confirmationCode')

    if username is None or password is None or confirmation_code is None:
        return missing_parameters('username', 'password', 'confirmationCode')

    logger.append_keys(username=username)
    logger.info("Setting a new password with the confirmation code")

    return service_response(identity_provider.confirm_forgot_password(username, confirmation_code, password))
