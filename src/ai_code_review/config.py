"""
Configuration Management

시스템 설정 관리

설정은 호출마다 새로 만들어지며 모듈 전역 인스턴스는 없다.
- from_env(): webhook/서버리스 실행용 환경 변수
- from_action_inputs(): GitHub Actions 입력값 (INPUT_*)
- from_file(): YAML 설정 파일
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Mapping
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler

from .review.filter import parse_exclude_patterns


class ConfigError(ValueError):
    """설정 검증 실패"""


@dataclass
class LLMConfig:
    """Completion 모델 설정"""
    provider: str = "openai"  # 'openai' or 'transformers'
    api_key: Optional[str] = None
    model: str = "gpt-4"
    max_tokens: int = 1000
    temperature: float = 0.2
    base_url: Optional[str] = None
    device: Optional[str] = None


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30


@dataclass
class ReviewConfig:
    """리뷰 대상 diff 설정"""
    exclude: str = ""
    max_diff_chars: Optional[int] = None  # None이면 diff를 자르지 않음

    @property
    def exclude_patterns(self) -> List[str]:
        return parse_exclude_patterns(self.exclude)


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    llm: LLMConfig = field(default_factory=LLMConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """환경 변수에서 설정 로드 (webhook 핸들러)"""
        env = os.environ if environ is None else environ
        return cls(
            llm=LLMConfig(
                provider=env.get("LLM_PROVIDER", "openai"),
                api_key=env.get("OPENAI_API_KEY"),
                model=env.get("OPENAI_API_MODEL") or "gpt-4",
                base_url=env.get("OPENAI_BASE_URL") or None,
                device=env.get("LLM_DEVICE") or None,
            ),
            github=GitHubConfig(
                token=env.get("GITHUB_TOKEN"),
                api_base_url=env.get("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(env.get("GITHUB_TIMEOUT", "30")),
            ),
            review=ReviewConfig(
                exclude=env.get("EXCLUDE_PATTERNS", ""),
                max_diff_chars=_optional_int(env.get("MAX_DIFF_CHARS")),
            ),
            logging=LoggingConfig(
                level=env.get("LOG_LEVEL", "INFO"),
                file_path=env.get("LOG_FILE") or None,
            ),
            debug=env.get("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_action_inputs(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        GitHub Actions 입력값에서 설정 로드

        action.yml의 입력값은 INPUT_<NAME> 환경 변수로 전달된다.
        """
        env = os.environ if environ is None else environ

        def get_input(name: str, default: str = "") -> str:
            return env.get(f"INPUT_{name.replace(' ', '_').upper()}", default).strip()

        return cls(
            llm=LLMConfig(
                provider=get_input("LLM_PROVIDER") or "openai",
                api_key=get_input("OPENAI_API_KEY") or None,
                model=get_input("OPENAI_API_MODEL") or "gpt-4",
                base_url=get_input("OPENAI_BASE_URL") or None,
            ),
            github=GitHubConfig(
                token=get_input("GITHUB_TOKEN") or None,
                api_base_url=env.get("GITHUB_API_URL", "https://api.github.com"),
            ),
            review=ReviewConfig(
                exclude=get_input("EXCLUDE"),
                max_diff_chars=_optional_int(get_input("MAX_DIFF_CHARS")),
            ),
            logging=LoggingConfig(
                level="DEBUG" if env.get("RUNNER_DEBUG") == "1" else "INFO",
            ),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(
            llm=LLMConfig(**config_data.get('llm', {})),
            github=GitHubConfig(**config_data.get('github', {})),
            review=ReviewConfig(**config_data.get('review', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        if not self.github.token:
            errors.append("GitHub token is required")

        if self.llm.provider not in {'openai', 'transformers'}:
            errors.append(f"Unknown LLM provider: {self.llm.provider}")
        elif self.llm.provider == 'openai' and not self.llm.api_key:
            errors.append("OpenAI API key is required")

        if not self.llm.model:
            errors.append("Model name is required")

        if self.llm.max_tokens <= 0:
            errors.append("max_tokens must be positive")

        if not 0.0 <= self.llm.temperature <= 2.0:
            errors.append("Temperature must be between 0.0 and 2.0")

        if self.review.max_diff_chars is not None and self.review.max_diff_chars < 0:
            errors.append("max_diff_chars must be non-negative")

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'llm': {
                'provider': self.llm.provider,
                'model': self.llm.model,
                'max_tokens': self.llm.max_tokens,
                'temperature': self.llm.temperature,
                'base_url': self.llm.base_url,
                'device': self.llm.device,
                # 보안상 API 키는 제외
            },
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'review': {
                'exclude': self.review.exclude,
                'max_diff_chars': self.review.max_diff_chars,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


def setup_logging(config: LoggingConfig) -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(handler)
