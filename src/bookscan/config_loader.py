"""Configuration loader with Pydantic validation for the book scanning pipeline.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """OCR engine configuration.

    Attributes:
        type: Engine type ("tesseract" or "rapidocr")
        tesseract_cmd: Optional path to the tesseract binary
        psm: Tesseract page segmentation mode (3 = automatic layout)
        use_angle_cls: RapidOCR angle classification for rotated text
        use_gpu: RapidOCR GPU acceleration if available
        text_score: RapidOCR minimum text detection confidence (0.0-1.0)
    """

    type: str = "tesseract"
    tesseract_cmd: Optional[str] = None
    psm: int = Field(default=3, ge=0, le=13)
    use_angle_cls: bool = True
    use_gpu: bool = False
    text_score: float = Field(default=0.5, ge=0.0, le=1.0)


class RecognitionConfig(BaseModel):
    """Recognition request configuration.

    Attributes:
        recognition_level: "accurate" or "fast"
        languages: BCP-47 language tags in priority order
        uses_language_correction: Let the engine apply its language model
        use_custom_words: Supply the book-domain vocabulary as a hint
        extra_words: Additional words appended to the vocabulary
    """

    recognition_level: Literal["accurate", "fast"] = "accurate"
    languages: List[str] = Field(default_factory=lambda: ["ja-JP", "en-US"], min_length=1)
    uses_language_correction: bool = True
    use_custom_words: bool = True
    extra_words: List[str] = Field(default_factory=list)


class ExtractionConfig(BaseModel):
    """ISBN extraction configuration.

    Attributes:
        verify_check_digits: Reject matched ISBNs whose check digit is wrong
    """

    verify_check_digits: bool = False


class CorrectionConfig(BaseModel):
    """Generative text correction configuration.

    Attributes:
        enabled: Enable the correction stage when a service is available
        provider: Correction service provider (currently only "openai")
        model: Model name passed to the provider
        api_key_env: Environment variable holding the API key
        timeout_s: Client request timeout in seconds
    """

    enabled: bool = True
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    api_key_env: str = "OPENAI_API_KEY"
    timeout_s: float = Field(default=30.0, gt=0.0)


class BookScanConfig(BaseModel):
    """Complete pipeline configuration.

    Attributes:
        engine: OCR engine configuration
        recognition: Recognition request configuration
        extraction: ISBN extraction configuration
        correction: Correction stage configuration
    """

    engine: EngineConfig = Field(default_factory=EngineConfig)
    recognition: RecognitionConfig = Field(default_factory=RecognitionConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    correction: CorrectionConfig = Field(default_factory=CorrectionConfig)


class Config(BaseModel):
    """Root configuration container.

    Attributes:
        bookscan: Pipeline configuration
    """

    bookscan: BookScanConfig = Field(default_factory=BookScanConfig)


def load_config(config_path: Path) -> Config:
    """Load and validate configuration from YAML file.

    The file may either hold the pipeline settings at top level or nest them
    under a ``bookscan`` key.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated Config object with all settings

    Raises:
        FileNotFoundError: If config file does not exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If configuration validation fails

    Example:
        >>> config = load_config(Path("src/bookscan/config.yaml"))
        >>> print(config.bookscan.recognition.languages)
        ['ja-JP', 'en-US']
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    if "bookscan" in config_dict:
        return Config(**config_dict)

    # Wrap flat YAML structure in 'bookscan' key for Config model
    return Config(bookscan=BookScanConfig(**config_dict))


def get_default_config() -> Config:
    """Get default configuration from bundled config.yaml file.

    Returns:
        Config object loaded from src/bookscan/config.yaml

    Example:
        >>> config = get_default_config()
        >>> print(config.bookscan.engine.type)
        tesseract
    """
    default_config_path = Path(__file__).parent / "config.yaml"
    if default_config_path.exists():
        return load_config(default_config_path)
    else:
        # Fallback to hardcoded defaults if config file is missing
        return Config()
