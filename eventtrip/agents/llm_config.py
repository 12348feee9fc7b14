"""
LLM provider configuration.

This module builds the chat model used for itinerary content generation,
either OpenAI (default) or AWS Bedrock, chosen by ``settings.llm_provider``.
The model is created on first use so the package imports without credentials.
"""

import logging

import boto3
from dotenv import load_dotenv
from langchain_aws import ChatBedrock
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI

from eventtrip.utils.config import Settings, settings

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class LLMProvider:
    """
    Lazily builds and caches the configured chat model.

    Each itinerary request invokes the model once; there is no automatic
    fallback to a second provider.
    """

    def __init__(self, config: Settings = None):
        self.config = config or settings
        self._model = None

    def _build_openai(self) -> BaseChatModel:
        if not self.config.openai_api_key:
            raise RuntimeError("OPENAI_API_KEY is not set")
        logger.info(f"Initializing OpenAI model {self.config.openai_model}")
        return ChatOpenAI(
            model=self.config.openai_model,
            temperature=self.config.llm_temperature,
            max_tokens=self.config.llm_max_tokens,
            api_key=self.config.openai_api_key,
        )

    def _build_bedrock(self) -> BaseChatModel:
        bedrock_kwargs = {
            "model_id": self.config.bedrock_model_id,
            "region_name": self.config.aws_region,
            "model_kwargs": {
                "temperature": self.config.llm_temperature,
                "max_tokens": self.config.llm_max_tokens,
            },
        }

        # Create boto3 session with specific profile (for multiple AWS accounts)
        aws_profile = self.config.aws_profile
        if aws_profile:
            logger.info(f"Creating boto3 session with profile: {aws_profile}")
            session = boto3.Session(profile_name=aws_profile)
            if session.get_credentials():
                bedrock_kwargs["client"] = session.client(
                    service_name="bedrock-runtime",
                    region_name=self.config.aws_region,
                )
            else:
                logger.warning(f"No credentials found for profile: {aws_profile}")
                bedrock_kwargs["credentials_profile_name"] = aws_profile

        logger.info(f"Initializing AWS Bedrock model {self.config.bedrock_model_id}")
        return ChatBedrock(**bedrock_kwargs)

    def get_model(self) -> BaseChatModel:
        """
        Get the configured chat model.

        Returns:
            LangChain chat model

        Raises:
            RuntimeError: If the configured provider cannot be initialized
        """
        if self._model is None:
            if self.config.llm_provider == "bedrock":
                self._model = self._build_bedrock()
            else:
                self._model = self._build_openai()
        return self._model


# Global instance
llm_provider = LLMProvider()
