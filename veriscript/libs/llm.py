"""LLM utilities for creating and configuring AI agents."""


import logging
import os
from typing import Any, Dict, Optional, Sequence

from pydantic_ai import Agent
from pydantic_ai.models.openai import OpenAIResponsesModel, OpenAIResponsesModelSettings

from veriscript.libs.config_loader import ConfigType, get_config


# Fix up logging level for httpx to WARNING to reduce noise
logging.getLogger("httpx").setLevel(logging.WARNING)



def create_agent(configs: ConfigType,
                 model: Optional[str] = None,
                 settings_dict: Optional[Dict[str, Any]] = None,
                 system_prompt: Optional[str] = None,
                 output_type: Any = None,
                 builtin_tools: Optional[Sequence[Any]] = None) -> Agent:
    """
    Create a pydantic-ai Agent configured with OpenAI models.

    Args:
        configs: Configuration dictionary (required)
        model: Model to use (overrides config value)
        settings_dict: Pydantic AI settings dict (overrides config values)
        system_prompt: System prompt for the agent (optional)
        output_type: Structured output type (defaults to plain text)
        builtin_tools: Provider-side tools such as web search (optional)

    Returns:
        Configured Agent

    Raises:
        KeyError: If the OpenAI API key is not found in config
    """
    api_key = get_config("openai.api_key", configs)
    organization = get_config("openai.organization", configs, default=None)
    model = model or get_config("openai.model", configs, default="gpt-4.1")
    base_settings = get_config("openai.pydantic_ai_settings", configs, default={}) or {}

    os.environ['OPENAI_API_KEY'] = api_key
    if organization:
        os.environ['OPENAI_ORG_ID'] = organization

    settings_dict = base_settings | (settings_dict or {})
    model_settings = OpenAIResponsesModelSettings(**settings_dict) if settings_dict else None
    openai_model = OpenAIResponsesModel(model)

    agent_kwargs: Dict[str, Any] = {
        "model": openai_model,
        "model_settings": model_settings,
        "retries": 0,
    }
    if system_prompt:
        agent_kwargs["system_prompt"] = system_prompt
    if output_type is not None:
        agent_kwargs["output_type"] = output_type
        agent_kwargs["output_retries"] = 0
    if builtin_tools:
        agent_kwargs["builtin_tools"] = list(builtin_tools)
    return Agent(**agent_kwargs)
