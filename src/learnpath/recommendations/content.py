"""Copy and curated resources used by the recommendation rules."""

from __future__ import annotations

# subject -> (description, reason, suggested_task)
EXPLORATION_TEXT: dict[str, tuple[str, str, str]] = {
    "Mathematics": (
        "Explore math concepts through engaging activities and problems.",
        "Adding mathematical thinking to your learning routine helps develop logical reasoning skills.",
        "Try a Khan Academy math lesson or solve a logic puzzle.",
    ),
    "Science": (
        "Discover scientific concepts through experiments and observations.",
        "Scientific exploration helps develop critical thinking and analytical skills.",
        "Conduct a simple home experiment or watch an educational science video.",
    ),
    "History": (
        "Explore historical events and their impact on our world today.",
        "Understanding history helps develop perspective and critical analysis of current events.",
        "Read about a historical figure or event that interests you.",
    ),
    "English": (
        "Develop reading and writing skills through engaging with stories and communication.",
        "Strong language skills are fundamental to success in all areas of learning.",
        "Read a short story or write in a journal for 15 minutes.",
    ),
    "Physical Activity": (
        "Get moving with physical activities that build strength, endurance, and coordination.",
        "Physical activity improves brain function, mood, and overall health.",
        "Try a 20-minute workout, yoga session, or outdoor walk.",
    ),
    "Life Skills": (
        "Develop practical skills that prepare you for daily life and independence.",
        "Life skills build confidence and prepare you for real-world challenges.",
        "Learn a basic cooking recipe or create a personal budget.",
    ),
    "Interest / Passion": (
        "Explore topics that spark your curiosity and creativity.",
        "Following your interests increases motivation and makes learning more enjoyable.",
        "Spend time on a hobby or creative project that excites you.",
    ),
}

# subject -> (description, suggested_task) for building on a strength
KNOWLEDGE_TEXT: dict[str, tuple[str, str]] = {
    "Mathematics": (
        "Take your math skills to the next level with more challenging problems.",
        "Try a challenging math problem set or explore a new mathematical concept.",
    ),
    "Science": (
        "Deepen your understanding of scientific concepts with more advanced experiments and studies.",
        "Design your own experiment or dive into a specific scientific field that interests you.",
    ),
    "History": (
        "Develop deeper historical analysis skills by exploring connections between different time periods.",
        "Compare two historical events or research primary sources about a historical topic.",
    ),
    "English": (
        "Enhance your language and communication skills through more advanced reading and writing.",
        "Read a challenging article or book, or write a persuasive essay on a topic you care about.",
    ),
    "Physical Activity": (
        "Progress in your physical activities by setting new goals and challenges.",
        "Try increasing the intensity of your workouts or learn a new sport or physical skill.",
    ),
    "Life Skills": (
        "Build on your practical skills with more advanced projects and responsibilities.",
        "Take on a multi-step cooking project or create a more detailed financial plan.",
    ),
    "Interest / Passion": (
        "Take your personal interests to a deeper level with more advanced projects.",
        "Create a more ambitious project related to your interests or share your knowledge with others.",
    ),
}

CHALLENGE_TEXT: dict[str, tuple[str, str]] = {
    "Mathematics": (
        "Challenge yourself with an advanced mathematical concept or problem-solving task.",
        "Try solving a challenging math puzzle or exploring a new area of mathematics.",
    ),
    "Science": (
        "Take on a more complex scientific challenge that tests your understanding and creativity.",
        "Design and conduct an experiment to test a hypothesis you've formed.",
    ),
    "History": (
        "Challenge yourself with a deeper historical analysis that connects multiple time periods or perspectives.",
        "Research and analyze a historical event from multiple perspectives.",
    ),
    "English": (
        "Push your language and communication skills with a challenging writing or analysis project.",
        "Write a short story or essay that incorporates advanced literary techniques.",
    ),
    "Physical Activity": (
        "Set a challenging physical goal that will push your limits and build new skills.",
        "Create and complete a personal fitness challenge that extends your current abilities.",
    ),
    "Life Skills": (
        "Take on a more complex life skill project that combines multiple areas of expertise.",
        "Plan and execute a multi-day project that requires planning, budgeting, and hands-on skills.",
    ),
    "Interest / Passion": (
        "Challenge yourself to take your personal interests to a new level of expertise or creativity.",
        "Create something that showcases your skills and knowledge in your area of interest.",
    ),
}


def exploration_text(subject: str) -> tuple[str, str, str]:
    return EXPLORATION_TEXT.get(subject) or (
        f"Explore {subject} through engaging activities and projects.",
        f"Adding {subject} to your learning routine will broaden your knowledge and skills.",
        f"Try a beginner-friendly {subject} activity or lesson.",
    )


def knowledge_text(subject: str) -> tuple[str, str]:
    return KNOWLEDGE_TEXT.get(subject) or (
        f"Enhance your {subject} skills with more advanced challenges.",
        f"Try a more challenging {subject} activity or project.",
    )


def challenge_text(subject: str) -> tuple[str, str]:
    return CHALLENGE_TEXT.get(subject) or (
        f"Challenge yourself with an advanced {subject} project that pushes your boundaries.",
        f"Set a challenging {subject} goal that builds on your current knowledge and skills.",
    )


# ---------------------------------------------------------------------------
# Resources: (title, url, description)
# ---------------------------------------------------------------------------

SUBJECT_RESOURCES: dict[str, list[tuple[str, str, str]]] = {
    "Mathematics": [
        ("Khan Academy - Mathematics", "https://www.khanacademy.org/math",
         "Free interactive lessons covering everything from basic arithmetic to calculus"),
        ("Desmos Graphing Calculator", "https://www.desmos.com/calculator",
         "Interactive graphing calculator for exploring mathematical concepts visually"),
        ("Brilliant.org - Math Courses", "https://brilliant.org/courses/#math-foundational",
         "Interactive courses that build problem-solving skills through challenges"),
    ],
    "Science": [
        ("Khan Academy - Science", "https://www.khanacademy.org/science",
         "Comprehensive lessons covering physics, chemistry, biology, and more"),
        ("NASA STEM Engagement", "https://www.nasa.gov/stem/",
         "Educational resources from NASA for exploring space science"),
        ("PhET Interactive Simulations", "https://phet.colorado.edu/",
         "Interactive science simulations that make learning through exploration"),
    ],
    "History": [
        ("Khan Academy - History", "https://www.khanacademy.org/humanities/world-history",
         "Comprehensive world history lessons and resources"),
        ("Crash Course History", "https://www.youtube.com/playlist?list=PL8dPuuaLjXtMwmepBjTSG593eG7ObzO7s",
         "Engaging video series covering major historical topics"),
        ("National Geographic History", "https://www.nationalgeographic.com/history",
         "Articles and resources exploring various historical topics and cultures"),
    ],
    "English": [
        ("Purdue Online Writing Lab", "https://owl.purdue.edu/",
         "Comprehensive writing resources covering grammar, style, and more"),
        ("CommonLit", "https://www.commonlit.org/",
         "Free collection of fiction and nonfiction texts for reading practice"),
        ("Grammarly", "https://www.grammarly.com/",
         "Tool for improving writing with grammar and style suggestions"),
    ],
    "Physical Activity": [
        ("Darebee Fitness", "https://darebee.com/",
         "Free visual workouts, fitness programs, and challenges"),
        ("Yoga With Adriene", "https://yogawithadriene.com/",
         "Free yoga videos for all levels and wellness practices"),
        ("NHS Physical Activity Guidelines", "https://www.nhs.uk/live-well/exercise/",
         "Evidence-based guidelines for physical activity and exercise"),
    ],
    "Life Skills": [
        ("Practical Money Skills", "https://www.practicalmoneyskills.com/",
         "Financial literacy resources for budgeting and money management"),
        ("AllRecipes", "https://www.allrecipes.com/recipes/1642/everyday-cooking/quick-and-easy/",
         "Collection of simple recipes for beginners learning to cook"),
        ("Ted Talks - Life Skills", "https://www.ted.com/topics/life",
         "Inspiring talks on various aspects of life skills and personal development"),
    ],
    "Interest / Passion": [
        ("Coursera", "https://www.coursera.org/",
         "Online courses covering virtually any subject of interest"),
        ("Instructables", "https://www.instructables.com/",
         "DIY project tutorials for creative hobbies and interests"),
        ("edX", "https://www.edx.org/",
         "Free courses from top universities on a wide variety of subjects"),
    ],
}

DEFAULT_RESOURCES: list[tuple[str, str, str]] = [
    ("Khan Academy", "https://www.khanacademy.org/",
     "Free educational resources covering a wide range of subjects"),
    ("YouTube Learning", "https://www.youtube.com/learning",
     "Educational videos on virtually any topic"),
]


def subject_resources(subject: str | None) -> list[tuple[str, str, str]]:
    return SUBJECT_RESOURCES.get(subject or "", DEFAULT_RESOURCES)
