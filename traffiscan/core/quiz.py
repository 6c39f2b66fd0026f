"""
Safety quiz scoring for TraffiScan.

Each question runs on a 30 second timer; a correct answer scores
twice the remaining seconds, never less than 10 points.
"""

from dataclasses import dataclass, field
from typing import List

SECONDS_PER_QUESTION = 30
MIN_POINTS = 10
TIMEOUT_ANSWER = -1

@dataclass(frozen=True)
class Question:
    question: str
    options: List[str]
    correct: int

DEFAULT_QUESTIONS = [
    Question("What should you do when you see a yellow traffic light?",
             ["Speed up", "Prepare to stop", "Stop immediately", "Honk"], 1),
    Question("Safe following distance in normal conditions?",
             ["1 second", "2 seconds", "3 seconds", "5 seconds"], 2),
    Question("When should you use high beams?",
             ["In fog", "Open rural roads", "In traffic", "Always"], 1),
    Question("What does a red octagon sign mean?",
             ["Yield", "Stop", "Speed limit", "Warning"], 1),
    Question("Ideal tire pressure check frequency?",
             ["Daily", "Weekly", "Monthly", "Yearly"], 2),
]

def score_answer(correct: bool, time_left: int) -> int:
    """정답이면 max(10, 남은 초 * 2)점, 오답/시간 초과면 0점."""
    if not correct:
        return 0
    return max(MIN_POINTS, time_left * 2)

@dataclass
class QuizSession:
    """퀴즈 진행 상태"""
    questions: List[Question] = field(default_factory=lambda: list(DEFAULT_QUESTIONS))
    current: int = 0
    score: int = 0
    correct_count: int = 0
    finished: bool = False

    def answer(self, answer_index: int, time_left: int) -> int:
        """
        현재 문제에 답하고 다음 문제로 넘어갑니다.

        Args:
            answer_index: 선택한 보기 (시간 초과는 -1)
            time_left: 남은 시간 (초)

        Returns:
            이번 문제에서 얻은 점수
        """
        if self.finished:
            raise RuntimeError("퀴즈가 이미 종료되었습니다")
        time_left = max(0, min(SECONDS_PER_QUESTION, time_left))
        correct = answer_index == self.questions[self.current].correct
        points = score_answer(correct, time_left)
        self.score += points
        if correct:
            self.correct_count += 1
        self.current += 1
        if self.current >= len(self.questions):
            self.finished = True
        return points

    def timeout(self) -> int:
        """시간 초과 처리 (오답)"""
        return self.answer(TIMEOUT_ANSWER, 0)
