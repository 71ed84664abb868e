#!/usr/bin/env python3
"""List available Gemini models."""
import os
import sys

from dotenv import load_dotenv
from google import genai

load_dotenv()

api_key = os.getenv("GEMINI_API_KEY")
if not api_key:
    print("Error: GEMINI_API_KEY not found in environment")
    sys.exit(1)

client = genai.Client(api_key=api_key)

print("Available Gemini models:")
print("-" * 60)
for model in client.models.list():
    actions = model.supported_actions or []
    if 'generateContent' in actions:
        print(f"Model: {model.name}")
        print(f"  Display Name: {model.display_name}")
        print(f"  Description: {model.description}")
        print(f"  Supported actions: {actions}")
        print("-" * 60)
