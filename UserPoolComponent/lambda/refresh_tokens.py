# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import identity_provider
from api_responses import metrics, get_header, missing_parameters, service_response

from aws_lambda_powertools import Tracer
tracer = Tracer()

# Exchanges a refresh token for new id and access tokens
@metrics.log_metrics
@tracer.capture_lambda_handler(capture_response=False)
def lambda_handler(event, context):

    refresh_token = get_header(event, 'refreshToken')
    if refresh_token is None:
        return missing_parameters('refreshToken')

    return service_response(identity_provider.refresh_tokens(refresh_token))
