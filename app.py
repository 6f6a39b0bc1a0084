#!/usr/bin/env python3
# app.py
import aws_cdk as cdk

from infra_cdk.config import get_settings
from infra_cdk.openapi_stack import OpenApiStack

settings = get_settings()

app = cdk.App()
OpenApiStack(app, settings.stack_name, settings=settings)

app.synth()
