"""
Prompt Builder

Builds the single review prompt sent to the completion model.
The instruction text is fixed; only the PR title, description and
aggregated diff change between invocations.
"""

import logging

from ..models.pull_request import PullRequestDetails


logger = logging.getLogger(__name__)


REVIEW_STRUCTURE = """
You are an automated code review assistant. Your review output **must** follow the structure below **exactly**:

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
{security_checklist}

(위 항목들 중 발견된 취약점 또는 개선 사항이 있으면 제시하고, 없다면 '결과: 취약점 없음' 식으로 표기)

**3.종합 의견**
(최종 요약 및 의견 제시)
"""

SECURITY_CHECKLIST = (
    "접근 통제 취약점",
    "암호화 실패",
    "인젝션",
    "안전하지 않은 설계",
    "보안 설정 오류",
    "취약하고 오래된 구성요소",
    "식별 및 인증 실패",
    "소프트웨어 및 데이터 무결성 실패",
    "보안 로깅 및 모니터링 실패",
    "서버 사이드 요청 위조(SSRF)",
    "사용되지 않거나 안전하지 않은 모듈 사용",
    "검증되지 않은 입력 처리",
    "민감한 데이터의 부적절한 처리",
    "민감한 정보 노출 (예: 하드코딩된 비밀번호)",
    "기타 보안 위험",
)

FORMAT_RULES = """
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
"""

PR_SECTION = """
Pull request title: {title}
Pull request description:
---
{description}
---

아래는 Pull Request에서 변경된 코드 diff 전체입니다:
(diff 시작)
{diff}
(diff 끝)

분석 결과를 위의 구조대로 작성해주세요.
"""


class PromptBuilder:
    """
    Builds the review prompt for the completion model.

    The structure, security checklist and formatting rules are
    rendered once; build() only appends the PR fields and the diff.
    """

    def __init__(self):
        checklist = "\n".join(f"- {item}" for item in SECURITY_CHECKLIST)
        self.instructions = (
            REVIEW_STRUCTURE.format(security_checklist=checklist) + FORMAT_RULES
        )

    def build(self, aggregated_diff: str, pr: PullRequestDetails) -> str:
        """
        Build the complete review prompt.

        Args:
            aggregated_diff: Output of aggregate_diff
            pr: Pull request whose title and description are embedded

        Returns:
            Prompt text, passed as-is as the system message
        """
        logger.debug(f"Building review prompt for {pr.full_name}#{pr.pull_number}")

        prompt = self.instructions + PR_SECTION.format(
            title=pr.title,
            description=pr.description,
            diff=aggregated_diff,
        )
        return prompt.strip()
