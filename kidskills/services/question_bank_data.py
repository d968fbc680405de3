"""
Hand-written question pools served when no remote model is available.
"""

# Ordered from gentlest to trickiest; used when stepping up a grammar focus
GRAMMAR_TYPES = [
    "general",
    "articles",
    "prepositions",
    "pronouns",
    "verb-tense",
    "sentence-structure",
    "subject-verb-agreement",
    "punctuation",
]

READING_TOPICS = ["animals", "space", "adventure", "general"]


def _options(*entries):
    """Build A-D options from (text, is_correct) pairs."""
    return [
        {"id": "ABCD"[index], "text": text, "isCorrect": is_correct}
        for index, (text, is_correct) in enumerate(entries)
    ]


GRAMMAR_QUESTIONS = {
    "punctuation": [
        {
            "question": "Which sentence uses punctuation correctly?",
            "options": _options(
                ("We went to the park we had a picnic.", False),
                ("We went to the park, we had a picnic.", False),
                ("We went to the park; we had a picnic.", True),
                ("We went to the park we had a picnic", False),
            ),
            "explanation": "Option C correctly uses a semicolon to join two related complete sentences.",
            "hint": "Look for the option that correctly separates two complete thoughts.",
        },
        {
            "question": "Which sentence should end with a question mark?",
            "options": _options(
                ("I like to read books", False),
                ("Where is my backpack", True),
                ("Please close the door", False),
                ("The sky is blue today", False),
            ),
            "explanation": "'Where is my backpack' asks something, so it needs a question mark.",
            "hint": "Which sentence is asking something?",
        },
    ],
    "verb-tense": [
        {
            "question": "Which sentence uses the correct verb tense?",
            "options": _options(
                ("Yesterday, I am going to the store.", False),
                ("Yesterday, I went to the store.", True),
                ("Yesterday, I will go to the store.", False),
                ("Yesterday, I go to the store.", False),
            ),
            "explanation": "Option B uses the past tense 'went' for something that happened yesterday.",
            "hint": "The word 'yesterday' tells you what tense to use.",
        },
        {
            "question": "Which word correctly completes the sentence? 'Last night, we ___ a movie.'",
            "options": _options(
                ("watch", False),
                ("watches", False),
                ("watched", True),
                ("watching", False),
            ),
            "explanation": "'Last night' is in the past, so we use the past tense 'watched'.",
            "hint": "Did this happen before now, now, or later?",
        },
    ],
    "subject-verb-agreement": [
        {
            "question": "Which sentence shows correct subject-verb agreement?",
            "options": _options(
                ("The team are playing well.", False),
                ("The team is playing well.", True),
                ("The team were playing well.", False),
                ("The team be playing well.", False),
            ),
            "explanation": "Option B uses the singular verb 'is' with the singular noun 'team'.",
            "hint": "Words like 'team' are usually treated as one group.",
        },
        {
            "question": "Which sentence is correct?",
            "options": _options(
                ("The dogs barks at the mail carrier.", False),
                ("The dogs bark at the mail carrier.", True),
                ("The dog bark at the mail carrier.", False),
                ("The dogs is barking at the mail carrier.", False),
            ),
            "explanation": "'Dogs' is plural, so it goes with the verb 'bark' without an s.",
            "hint": "Is there one dog or more than one?",
        },
    ],
    "pronouns": [
        {
            "question": "Which sentence uses pronouns correctly?",
            "options": _options(
                ("Me and my friend went to the movie.", False),
                ("My friend and me went to the movie.", False),
                ("My friend and I went to the movie.", True),
                ("My friend and myself went to the movie.", False),
            ),
            "explanation": "Option C uses the subject pronoun 'I' in a compound subject.",
            "hint": "Which pronoun would you use if you were alone: 'I went' or 'me went'?",
        },
        {
            "question": "Choose the pronoun that completes the sentence: 'Mia lost ___ jacket.'",
            "options": _options(
                ("her", True),
                ("she", False),
                ("hers", False),
                ("herself", False),
            ),
            "explanation": "'Her' shows that the jacket belongs to Mia.",
            "hint": "Which word shows who owns the jacket?",
        },
    ],
    "articles": [
        {
            "question": "Which sentence uses articles correctly?",
            "options": _options(
                ("I saw a elephant at the zoo.", False),
                ("I saw an elephant at the zoo.", True),
                ("I saw the elephant at a zoo.", False),
                ("I saw elephant at the zoo.", False),
            ),
            "explanation": "Option B uses 'an' before 'elephant' because it begins with a vowel sound.",
            "hint": "Use 'an' before words that begin with a vowel sound.",
        },
    ],
    "prepositions": [
        {
            "question": "Which sentence uses prepositions correctly?",
            "options": _options(
                ("The book is on the table.", True),
                ("The book is at the table.", False),
                ("The book is by the table.", False),
                ("The book is in the table.", False),
            ),
            "explanation": "'On' shows that the book sits on top of the table.",
            "hint": "Think about where the book is compared to the table.",
        },
    ],
    "sentence-structure": [
        {
            "question": "Which is a complete sentence?",
            "options": _options(
                ("Running to the store.", False),
                ("When we arrived at the party.", False),
                ("The dog barked loudly.", True),
                ("Because it was raining.", False),
            ),
            "explanation": "Option C has a subject (the dog) and a verb (barked).",
            "hint": "A complete sentence needs a subject and a verb.",
        },
    ],
    "general": [
        {
            "question": "Which sentence is grammatically correct?",
            "options": _options(
                ("She don't like ice cream.", False),
                ("She doesn't like ice cream.", True),
                ("She not like ice cream.", False),
                ("She do not likes ice cream.", False),
            ),
            "explanation": "With 'she', the negative form is 'doesn't'.",
            "hint": "For he, she or it, use 'doesn't'.",
        },
    ],
}

VOCABULARY_QUESTIONS = {
    "easy": [
        {
            "question": "Which word means 'very big'?",
            "options": _options(("Tiny", False), ("Huge", True), ("Small", False), ("Fast", False)),
            "explanation": "The word 'huge' means very big.",
            "hint": "Think of something that is the opposite of small.",
        },
        {
            "question": "What is the meaning of 'happy'?",
            "options": _options(("Feeling joy", True), ("Feeling sad", False), ("Feeling tired", False), ("Feeling angry", False)),
            "explanation": "Happy means feeling or showing joy.",
            "hint": "Think of how you feel when something good happens.",
        },
    ],
    "medium": [
        {
            "question": "Which word is a synonym for 'brave'?",
            "options": _options(("Scared", False), ("Timid", False), ("Courageous", True), ("Weak", False)),
            "explanation": "Courageous means brave, able to do something even when it is scary.",
            "hint": "Look for a word that describes someone who isn't afraid.",
        },
        {
            "question": "What does the word 'ancient' mean?",
            "options": _options(("Very new", False), ("Very old", True), ("Very big", False), ("Very small", False)),
            "explanation": "Ancient means from a very long time ago.",
            "hint": "Think about things like dinosaurs or pyramids.",
        },
    ],
    "hard": [
        {
            "question": "What is the definition of 'perseverance'?",
            "options": _options(
                ("Giving up easily", False),
                ("Being very tall", False),
                ("Continuing despite difficulties", True),
                ("Running very fast", False),
            ),
            "explanation": "Perseverance means to keep trying even when something is hard.",
            "hint": "Think about continuing to try even when things are hard.",
        },
        {
            "question": "Which word means 'to make something better'?",
            "options": _options(("Worsen", False), ("Improve", True), ("Maintain", False), ("Ignore", False)),
            "explanation": "Improve means to make or become better.",
            "hint": "Think of what happens when you practice a skill over time.",
        },
    ],
}

READING_PASSAGES = {
    "animals": [
        {
            "passage": (
                "Elephants are the largest land animals on Earth. They have long trunks that they use like hands. "
                "With their trunks, elephants can pick up food, spray water, and even greet other elephants. "
                "Elephants live in herds led by the oldest female, called the matriarch. They have excellent memories "
                "and can remember routes to water from many years ago. Baby elephants are called calves and can weigh "
                "around 200 pounds at birth!"
            ),
            "questions": [
                {
                    "question": "What do elephants use their trunks for?",
                    "options": _options(
                        ("To fly", False),
                        ("To pick up food and spray water", True),
                        ("To dig underground tunnels", False),
                        ("To make loud noises", False),
                    ),
                    "explanation": "The passage says elephants use their trunks like hands to pick up food, spray water, and greet other elephants.",
                    "hint": "Look at the second and third sentences of the passage.",
                },
                {
                    "question": "Who leads an elephant herd?",
                    "options": _options(
                        ("The largest male", False),
                        ("The youngest female", False),
                        ("The oldest female", True),
                        ("The fastest runner", False),
                    ),
                    "explanation": "Elephant herds are led by the oldest female, called the matriarch.",
                    "hint": "The leader has a special name mentioned in the passage.",
                },
            ],
        },
    ],
    "space": [
        {
            "passage": (
                "Our solar system has eight planets that orbit around the Sun. The four inner planets are Mercury, "
                "Venus, Earth, and Mars. They are called rocky planets because they have solid surfaces. The four outer "
                "planets are Jupiter, Saturn, Uranus, and Neptune. These are called gas giants because they are made "
                "mostly of gas. Earth is the only planet we know that has life. It has water, air, and the right "
                "temperature for plants and animals to live."
            ),
            "questions": [
                {
                    "question": "Why are the four outer planets called gas giants?",
                    "options": _options(
                        ("Because they are very hot", False),
                        ("Because they have rings", False),
                        ("Because they are made mostly of gas", True),
                        ("Because they are far from Earth", False),
                    ),
                    "explanation": "Jupiter, Saturn, Uranus, and Neptune are called gas giants because they are made mostly of gas.",
                    "hint": "Look at the description of the outer planets in the passage.",
                },
                {
                    "question": "Which planet is known to have life?",
                    "options": _options(("Mars", False), ("Venus", False), ("Jupiter", False), ("Earth", True)),
                    "explanation": "Earth is the only planet we know that has life because it has water, air, and the right temperature.",
                    "hint": "The passage mentions which planet has the right conditions for life.",
                },
            ],
        },
    ],
    "adventure": [
        {
            "passage": (
                "Maya was exploring the old forest behind her grandparents' house. She had heard stories about a hidden "
                "treasure somewhere deep in the woods. With her backpack full of supplies, she followed a narrow path "
                "that twisted between tall trees. Suddenly, she spotted something shiny near a large rock. It was an old "
                "key with strange markings! Maya wondered what the key might open. As the sun began to set, Maya "
                "decided to return home, but she would come back tomorrow to continue her adventure."
            ),
            "questions": [
                {
                    "question": "What did Maya find near the large rock?",
                    "options": _options(
                        ("A map", False),
                        ("An old key", True),
                        ("A treasure chest", False),
                        ("A secret door", False),
                    ),
                    "explanation": "Maya spotted something near a large rock, and it turned out to be an old key with strange markings.",
                    "hint": "Look for what Maya discovered near the rock.",
                },
                {
                    "question": "Why did Maya decide to go home?",
                    "options": _options(
                        ("She was scared", False),
                        ("She found the treasure", False),
                        ("It started to rain", False),
                        ("The sun was setting", True),
                    ),
                    "explanation": "Maya decided to return home as the sun began to set.",
                    "hint": "The passage mentions a change in the time of day.",
                },
            ],
        },
    ],
    "general": [
        {
            "passage": (
                "Libraries are amazing places where you can find books on almost any topic. They have fiction books "
                "with exciting stories and non-fiction books full of facts. Many libraries also have computers, movies, "
                "and music that people can borrow. Librarians help visitors find what they're looking for and recommend "
                "new books to read. Libraries often have special programs for children, like story time and summer "
                "reading clubs. Best of all, most libraries are free to use with a library card!"
            ),
            "questions": [
                {
                    "question": "What do librarians do according to the passage?",
                    "options": _options(
                        ("Write books", False),
                        ("Clean the library", False),
                        ("Help visitors find books and make recommendations", True),
                        ("Fix computers", False),
                    ),
                    "explanation": "Librarians help visitors find what they're looking for and recommend new books.",
                    "hint": "Look at the sentence that mentions librarians.",
                },
                {
                    "question": "What does the passage say about the cost of using libraries?",
                    "options": _options(
                        ("They are expensive", False),
                        ("They are free with a library card", True),
                        ("They cost money only for children", False),
                        ("The passage doesn't mention cost", False),
                    ),
                    "explanation": "Most libraries are free to use with a library card.",
                    "hint": "Check the last sentence of the passage.",
                },
            ],
        },
    ],
}

LEADERSHIP_SCENARIOS = [
    {
        "question": "Your friend is being left out of a game at recess. What would be the best thing to do?",
        "options": _options(
            ("Ignore it because it's not your problem.", False),
            ("Tell the teacher right away without trying to help.", False),
            ("Invite your friend to join your own game or activity.", True),
            ("Tell the other kids they are being mean.", False),
        ),
        "explanation": "Good leaders include others and make them feel welcome. Inviting your friend shows kindness.",
        "hint": "Think about what would make your friend feel included.",
    },
    {
        "question": "You see someone in your class struggling with a math problem that you know how to solve. What should you do?",
        "options": _options(
            ("Tell them they should study more.", False),
            ("Offer to explain how to solve the problem.", True),
            ("Solve it for them without explaining.", False),
            ("Ignore it because they need to learn on their own.", False),
        ),
        "explanation": "Good leaders help others learn. Explaining the steps helps your classmate solve the next one too.",
        "hint": "What would help them both now and in the future?",
    },
    {
        "question": "Your team is working on a project, but two members keep arguing about how to do it. What would a good leader do?",
        "options": _options(
            ("Pick the idea you like best and tell everyone to do it that way.", False),
            ("Let them argue until someone gives up.", False),
            ("Suggest combining ideas from both sides to create a better solution.", True),
            ("Tell the teacher that your team can't work together.", False),
        ),
        "explanation": "Good leaders look for a way to include everyone's ideas. Combining ideas often leads to a better plan.",
        "hint": "Is there a way to make both people feel their ideas are valued?",
    },
]
