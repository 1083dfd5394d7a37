"""
Unit tests for the prompt builder, response sanitizer and review generator.
"""

import sys
import importlib
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, Mock, patch

from ai_code_review.config import LLMConfig
from ai_code_review.llm.generator import GenerationConfig, ReviewGenerator, create_review_generator
from ai_code_review.llm.prompts import PromptBuilder, SECURITY_CHECKLIST
from ai_code_review.llm.sanitizer import sanitize
from ai_code_review.models.pull_request import PullRequestDetails


EXPECTED_PROMPT = """You are an automated code review assistant. Your review output **must** follow the structure below **exactly**:

[AI Review]

**1.개요**
(이 Pull Request의 요약 및 주요 변경 사항을 간단히 설명)

**2.분석 영역**

2.1 런타임 오류 검사
(런타임 에러 가능성, NPE, IndexError 등)

2.2 성능 최적화
(비효율적인 루프, 불필요한 연산, 리소스 낭비, DB 호출 최적화 등)

2.3 코드 스타일 및 가독성
(가독성, 네이밍, 불필요한 코드, 포맷팅, 클래스/메서드 분리 등)

2.4 취약점 분석
- 접근 통제 취약점
- 암호화 실패
- 인젝션
- 안전하지 않은 설계
- 보안 설정 오류
- 취약하고 오래된 구성요소
- 식별 및 인증 실패
- 소프트웨어 및 데이터 무결성 실패
- 보안 로깅 및 모니터링 실패
- 서버 사이드 요청 위조(SSRF)
- 사용되지 않거나 안전하지 않은 모듈 사용
- 검증되지 않은 입력 처리
- 민감한 데이터의 부적절한 처리
- 민감한 정보 노출 (예: 하드코딩된 비밀번호)
- 기타 보안 위험

(위 항목들 중 발견된 취약점 또는 개선 사항이 있으면 제시하고, 없다면 '결과: 취약점 없음' 식으로 표기)

**3.종합 의견**
(최종 요약 및 의견 제시)

##중요##:
- 절대로 코드블록(```)이나 JSON 포맷이 아닌 **위의 텍스트 구조** 그대로만 출력하세요.
- **긍정적 코멘트나 칭찬은 작성하지 말고**, 개선점이 있는 경우에만 작성하세요.
- 만약 개선할 점이 전혀 없다면, 2번 항목(분석 영역)에서 각 섹션에 "발견되지 않음"이라고 쓰고, 3번 항목에서도 별도 개선점 없이 마무리하세요.
- **2.분석 영역 항목에 대한 의견을 작성할때는 다음과 같이 코드 블록을 작성하세요** **(예시):

수정 전:
```java
기존 java 코드블럭
```

수정 후:
```java
개선된 java 코드블럭
```

Pull request title: Add parser
Pull request description:
---
Parses input
---

아래는 Pull Request에서 변경된 코드 diff 전체입니다:
(diff 시작)
diff --git a/p.py b/p.py
+ x = 1
(diff 끝)

분석 결과를 위의 구조대로 작성해주세요."""


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestPromptBuilder:
    """Unit tests for PromptBuilder."""

    def setup_method(self):
        self.builder = PromptBuilder()
        self.pr = PullRequestDetails("octo", "repo", 5, "Add parser", "Parses {things}")

    def test_structure_sections_in_order(self):
        prompt = self.builder.build("+ x = 1", self.pr)

        markers = [
            "[AI Review]",
            "**1.개요**",
            "2.1 런타임 오류 검사",
            "2.2 성능 최적화",
            "2.3 코드 스타일 및 가독성",
            "2.4 취약점 분석",
            "**3.종합 의견**",
            "##중요##:",
            "Pull request title: Add parser",
            "(diff 시작)",
            "(diff 끝)",
        ]
        positions = [prompt.index(m) for m in markers]
        assert positions == sorted(positions)

    def test_security_checklist(self):
        prompt = self.builder.build("+ x", self.pr)

        for item in SECURITY_CHECKLIST:
            assert f"- {item}\n" in prompt

    def test_interpolated_text_is_verbatim(self):
        diff = "diff --git a/t.py b/t.py\n+ print('{}'.format(1))\n+ tab\there"

        prompt = self.builder.build(diff, self.pr)

        assert "Pull request description:\n---\nParses {things}\n---" in prompt
        assert f"(diff 시작)\n{diff}\n(diff 끝)" in prompt

    def test_deterministic_and_trimmed(self):
        first = self.builder.build("+ a", self.pr)
        second = PromptBuilder().build("+ a", self.pr)

        assert first == second
        assert first.startswith("You are an automated code review assistant.")
        assert first.endswith("분석 결과를 위의 구조대로 작성해주세요.")

    def test_full_prompt_text(self):
        pr = PullRequestDetails("octo", "repo", 5, "Add parser", "Parses input")

        prompt = self.builder.build("diff --git a/p.py b/p.py\n+ x = 1", pr)

        assert prompt == EXPECTED_PROMPT

    def test_template_identical_across_inputs(self):
        other = PullRequestDetails("a", "b", 9, "Other", "")

        first = self.builder.build("+ a", self.pr)
        second = self.builder.build("+ zzz", other)

        head = "Pull request title:"
        assert first.split(head)[0] == second.split(head)[0]


class TestSanitize:
    """Unit tests for sanitize."""

    def test_strips_wrapping_fence_with_language(self):
        raw = "```markdown\n[AI Review]\n**1.개요**\n...\n```"

        result = sanitize(raw)

        assert result.startswith("[AI Review]")
        assert "```" not in result
        assert "markdown" not in result

    def test_strips_inner_fences(self):
        raw = "수정 전:\n```java\nint a;\n```\n"

        assert sanitize(raw) == "수정 전:\n\nint a;"

    def test_empty(self):
        assert sanitize("") == ""
        assert sanitize(None) == ""
        assert sanitize("   \n ") == ""

    def test_idempotent_on_example(self):
        raw = "  ```py\nx\n``````\n"

        assert sanitize(sanitize(raw)) == sanitize(raw)


class TestReviewGenerator:
    """Unit tests for ReviewGenerator."""

    def setup_method(self):
        self.client = Mock()
        self.generator = ReviewGenerator(self.client, "gpt-4")

    def test_request_shape(self):
        self.client.chat.completions.create.return_value = completion("[AI Review] ok")

        result = self.generator.generate("PROMPT")

        assert result == "[AI Review] ok"
        self.client.chat.completions.create.assert_called_once_with(
            model="gpt-4",
            messages=[{"role": "system", "content": "PROMPT"}],
            max_tokens=1000,
            temperature=0.2,
        )

    def test_response_is_sanitized(self):
        self.client.chat.completions.create.return_value = completion("```\n[AI Review]\n```")

        assert self.generator.generate("p") == "[AI Review]"

    def test_failure_degrades_to_empty_string(self, caplog):
        """Completion errors are logged, never raised."""
        self.client.chat.completions.create.side_effect = RuntimeError("quota exceeded")

        with caplog.at_level("ERROR"):
            result = self.generator.generate("p")

        assert result == ""
        assert "Error getting AI response: quota exceeded" in caplog.text

    def test_missing_content(self):
        self.client.chat.completions.create.return_value = completion(None)
        assert self.generator.generate("p") == ""

        self.client.chat.completions.create.return_value = SimpleNamespace(choices=[])
        assert self.generator.generate("p") == ""

    def test_custom_generation_config(self):
        generator = ReviewGenerator(self.client, "m", GenerationConfig(max_tokens=10, temperature=0.0))
        self.client.chat.completions.create.return_value = completion("x")

        generator.generate("p")

        kwargs = self.client.chat.completions.create.call_args[1]
        assert kwargs["max_tokens"] == 10
        assert kwargs["temperature"] == 0.0
        assert generator.get_model_info()["generation_config"]["max_tokens"] == 10


class TestCreateReviewGenerator:
    """Unit tests for provider selection."""

    def test_openai_provider(self):
        with patch("ai_code_review.llm.generator.OpenAI") as mock_openai:
            generator = create_review_generator(LLMConfig(api_key="sk-test", model="gpt-4o"))

        mock_openai.assert_called_once_with(api_key="sk-test", base_url=None)
        assert generator.client is mock_openai.return_value
        assert generator.model_name == "gpt-4o"
        assert generator.generation_config.max_tokens == 1000

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_review_generator(LLMConfig(provider="carrier-pigeon"))


    def test_transformers_provider(self, local_backend):
        generator = create_review_generator(
            LLMConfig(provider="transformers", model="tiny-model", max_tokens=64)
        )

        assert isinstance(generator, local_backend.module.LocalReviewGenerator)
        local_backend.transformers.AutoTokenizer.from_pretrained.assert_called_once_with("tiny-model")
        local_backend.transformers.AutoModelForCausalLM.from_pretrained.assert_called_once_with("tiny-model")
        assert generator.device == "cpu"
        assert generator.generation_config.max_tokens == 64


@pytest.fixture
def local_backend():
    """Import the local backend with torch and transformers replaced by mocks."""
    torch = MagicMock()
    torch.cuda.is_available.return_value = False
    transformers = MagicMock()

    with patch.dict(sys.modules, {"torch": torch, "transformers": transformers}):
        sys.modules.pop("ai_code_review.llm.local", None)
        module = importlib.import_module("ai_code_review.llm.local")
        yield SimpleNamespace(module=module, torch=torch, transformers=transformers)


class TestLocalReviewGenerator:
    """Unit tests for LocalReviewGenerator."""

    @pytest.fixture(autouse=True)
    def setup_model(self, local_backend):
        self.backend = local_backend
        self.tokenizer = local_backend.transformers.AutoTokenizer.from_pretrained.return_value
        self.model = local_backend.transformers.AutoModelForCausalLM.from_pretrained.return_value

        self.input_ids = MagicMock()
        self.input_ids.shape = (1, 3)
        self.input_ids.to.return_value = self.input_ids

        self.tokenizer.chat_template = "{{ messages }}"
        self.tokenizer.apply_chat_template.return_value = self.input_ids
        self.tokenizer.decode.return_value = "```markdown\n[AI Review]\n**1.개요**\n로컬 모델 리뷰\n```"
        self.model.generate.return_value = [[101, 102, 103, 7, 8]]

    def test_chat_template_prompt(self):
        generator = self.backend.module.LocalReviewGenerator("tiny-model")

        result = generator.generate("PROMPT")

        assert result == "[AI Review]\n**1.개요**\n로컬 모델 리뷰"
        self.tokenizer.apply_chat_template.assert_called_once_with(
            [{"role": "system", "content": "PROMPT"}],
            add_generation_prompt=True,
            return_tensors="pt",
        )
        self.input_ids.to.assert_called_once_with("cpu")
        self.backend.torch.no_grad.assert_called_once_with()

        kwargs = self.model.generate.call_args[1]
        assert self.model.generate.call_args[0] == (self.input_ids,)
        assert kwargs["max_new_tokens"] == 1000
        assert kwargs["temperature"] == 0.2

    def test_only_new_tokens_are_decoded(self):
        generator = self.backend.module.LocalReviewGenerator("tiny-model", device="cpu")

        generator.generate("PROMPT")

        self.tokenizer.decode.assert_called_once_with([7, 8], skip_special_tokens=True)

    def test_batch_encoding_from_chat_template(self):
        self.tokenizer.apply_chat_template.return_value = {
            "input_ids": self.input_ids,
            "attention_mask": MagicMock(),
        }
        generator = self.backend.module.LocalReviewGenerator("tiny-model", device="cpu")

        assert generator.generate("PROMPT").startswith("[AI Review]")
        self.tokenizer.decode.assert_called_once_with([7, 8], skip_special_tokens=True)

    def test_plain_encoding_without_chat_template(self):
        self.tokenizer.chat_template = None
        self.tokenizer.encode.return_value = self.input_ids
        generator = self.backend.module.LocalReviewGenerator("tiny-model", device="cpu")

        generator.generate("PROMPT")

        self.tokenizer.encode.assert_called_once_with("PROMPT", return_tensors="pt")
        self.tokenizer.apply_chat_template.assert_not_called()

    def test_generation_failure_degrades_to_empty_string(self, caplog):
        self.model.generate.side_effect = RuntimeError("CUDA out of memory")
        generator = self.backend.module.LocalReviewGenerator("tiny-model", device="cpu")

        with caplog.at_level("ERROR"):
            assert generator.generate("PROMPT") == ""

        assert "CUDA out of memory" in caplog.text
