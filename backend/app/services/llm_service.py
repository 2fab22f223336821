import logging
from typing import Dict, List, Optional

# LangChain Imports
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage, AIMessage

# Configuration
from config import LLM_PROVIDER, LLM_API_KEY, LLM_MODEL as OVERRIDE_MODEL, OLLAMA_URL

logger = logging.getLogger(__name__)

# Determine Model Name based on Provider
# If LLM_MODEL is set in env, it overrides everything.
DEFAULT_MODELS = {
    "ollama": "llama3.1",
    "openrouter": "google/gemini-2.0-flash-001",
    "openai": "gpt-4o",
}

MODEL_NAME = OVERRIDE_MODEL if OVERRIDE_MODEL else DEFAULT_MODELS.get(LLM_PROVIDER, "gpt-3.5-turbo")

# Base URLs for paid providers
PROVIDER_URLS = {
    "openrouter": "https://openrouter.ai/api/v1",
    "openai": None  # Uses default OpenAI URL
}


def get_llm(temperature: float = 0.7, max_tokens: int = 2000):
    """
    Factory function to get a configured LangChain Chat Model instance.
    Supports: Ollama (Local), OpenRouter, OpenAI
    """

    # 1. Ollama (Local)
    if LLM_PROVIDER == "ollama":
        return ChatOllama(
            base_url=OLLAMA_URL,
            model=MODEL_NAME,
            temperature=temperature,
            num_predict=max_tokens,
            timeout=120.0
        )

    # 2. OpenAI Compatible (OpenRouter, OpenAI)
    elif LLM_PROVIDER in ["openrouter", "openai"]:
        if not LLM_API_KEY:
            # Let the call fail so a wrong config is visible
            logger.critical(f"[LLM Service] Missing API Key for provider {LLM_PROVIDER}")

        return ChatOpenAI(
            model=MODEL_NAME,
            api_key=LLM_API_KEY,
            base_url=PROVIDER_URLS.get(LLM_PROVIDER),
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=60.0
        )

    # 3. Fallback / Unknown
    else:
        logger.warning(f"[LLM Service] Unknown provider '{LLM_PROVIDER}'. Defaulting to Ollama.")
        return ChatOllama(
            base_url=OLLAMA_URL,
            model=MODEL_NAME,
            temperature=temperature,
            num_predict=max_tokens,
            timeout=120.0
        )


def _log_usage(response) -> None:
    metadata = response.response_metadata
    if not metadata:
        return

    # Ollama returns tokens directly in metadata, not in nested 'usage'
    input_tokens = metadata.get('prompt_eval_count') or 0
    output_tokens = metadata.get('eval_count') or 0

    # OpenAI-compatible providers
    if input_tokens == 0 and output_tokens == 0:
        usage = metadata.get('token_usage') or metadata.get('usage') or {}
        input_tokens = usage.get('prompt_tokens') or usage.get('input_tokens') or 0
        output_tokens = usage.get('completion_tokens') or usage.get('output_tokens') or 0

    logger.info(f"[LLM Stats] Input: {input_tokens}, Output: {output_tokens}, Total: {input_tokens + output_tokens}")


def _invoke(messages, temperature: float, max_tokens: int) -> Optional[str]:
    try:
        llm = get_llm(temperature=temperature, max_tokens=max_tokens)
        response = llm.invoke(messages)
        content = response.content

        if not content:
            logger.warning("[LLM Service] Empty content received.")
            return None

        _log_usage(response)
        return content

    except Exception as e:
        logger.error(f"[LLM Service] Text Call Error: {e}")
        return None


def call_llm(
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.7,
    max_tokens: int = 2000
) -> Optional[str]:
    """
    Executes a standard chat request. Returns None when the provider fails.
    """
    logger.info(f"[LLM Service] Calling Model (Text): {MODEL_NAME}")

    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_prompt)
    ]
    return _invoke(messages, temperature, max_tokens)


def call_llm_with_history(
    system_prompt: str,
    history: List[Dict[str, str]],
    user_message: str,
    temperature: float = 0.7,
    max_tokens: int = 1000
) -> Optional[str]:
    """
    Same as call_llm, with prior turns ({"role", "content"} dicts, oldest first)
    placed between the system prompt and the new message.
    """
    logger.info(f"[LLM Service] Calling Model (Chat, {len(history)} prior turns): {MODEL_NAME}")

    messages = [SystemMessage(content=system_prompt)]
    for msg in history:
        if msg["role"] == "user":
            messages.append(HumanMessage(content=msg["content"]))
        else:
            messages.append(AIMessage(content=msg["content"]))
    messages.append(HumanMessage(content=user_message))

    return _invoke(messages, temperature, max_tokens)
