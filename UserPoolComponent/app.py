#!/usr/bin/env python3
# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import aws_cdk as cdk

from user_pool_component.user_pool_stack import UserPoolStack

# Set to False to leave new users unconfirmed until they enter the emailed code
AUTO_CONFIRM_USER = True

app = cdk.App()
UserPoolStack(
    app,
    "UserPoolStack",
    auto_confirm_user=AUTO_CONFIRM_USER
)

app.synth()
