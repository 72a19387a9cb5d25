# explorer/services/shuffler.py
import random

from explorer.models.question import Question


def shuffle_options(question: Question, rng: random.Random | None = None) -> Question:
    """
    Returns a copy of the question with its options in uniformly random order
    and correct_answer pointing at the same option text as before.
    """
    rng = rng or random
    tagged = [(option, idx == question.correct_answer) for idx, option in enumerate(question.options)]

    # Fisher-Yates, last index down to 1
    for i in range(len(tagged) - 1, 0, -1):
        j = rng.randint(0, i)
        tagged[i], tagged[j] = tagged[j], tagged[i]

    new_correct = next(idx for idx, (_, is_correct) in enumerate(tagged) if is_correct)
    return question.model_copy(
        update={"options": [option for option, _ in tagged], "correct_answer": new_correct}
    )
