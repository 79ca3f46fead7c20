"""Writing samples shared across tests."""

SHORT_SAMPLE = "John helped with meal prep today. He did really well cutting vegetables."

DAY_SAMPLE = (
    "At 7:00 AM John woke up and got ready for the day. "
    "He made his bed and went to breakfast. "
    "At 9:30 AM he helped with laundry and folded his shirts really well. "
    "After lunch he went for a walk with staff. "
    "In the afternoon he seemed a bit tired but he still finished his chores. "
    "He didn't want to watch TV so he cooked dinner with Sarah. "
    "She said he did great."
)

FORMAL_SAMPLE = (
    "The individual demonstrated appropriate skills. "
    "The individual participated in the session; the participant completed all tasks. "
    "The client exhibited significant progress."
)
