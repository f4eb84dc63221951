"""Catalog constants shared by validation and the provider onboarding flow"""

SKILLS_CATEGORIES: dict[str, list[str]] = {
    "Matières Scolaires": [
        "Mathématiques",
        "Physique",
        "Chimie",
        "SVT",
        "Français",
        "Arabe",
        "Anglais",
        "Espagnol",
        "Histoire-Géographie",
        "Philosophie",
        "Economie",
    ],
    "Préparation aux Concours": [
        "TCF",
        "TOEFL",
        "IELTS",
        "Concours ENSAM",
        "Concours Médecine",
        "Concours CNC",
        "Bac Maroc",
    ],
    "Programmation & Développement": [
        "Python",
        "JavaScript",
        "TypeScript",
        "Java",
        "C++",
        "PHP",
        "React",
        "React Native",
        "Angular",
        "Vue.js",
        "Node.js",
        "NestJS",
        "Django",
        "Laravel",
        "Spring Boot",
    ],
    "Data & Intelligence Artificielle": [
        "Machine Learning",
        "Deep Learning",
        "Data Science",
        "Data Analysis",
        "SQL",
        "MongoDB",
        "PostgreSQL",
        "Big Data",
        "Kafka",
        "Spark",
    ],
    "DevOps & Cloud": [
        "Docker",
        "Kubernetes",
        "AWS",
        "Azure",
        "Google Cloud",
        "CI/CD",
        "Jenkins",
        "Git",
        "Linux",
    ],
    "Design & Créativité": [
        "UI/UX Design",
        "Figma",
        "Adobe Photoshop",
        "Adobe Illustrator",
        "Adobe XD",
        "Sketch",
        "Graphic Design",
        "3D Modeling",
        "Blender",
        "AutoCAD",
    ],
    "Vidéo & Photo": [
        "Montage Vidéo",
        "Adobe Premiere Pro",
        "Final Cut Pro",
        "DaVinci Resolve",
        "After Effects",
        "Photographie",
        "Lightroom",
        "Caméra",
        "Drone",
    ],
    "Business & Marketing": [
        "Marketing Digital",
        "SEO",
        "Google Ads",
        "Facebook Ads",
        "Community Management",
        "E-commerce",
        "Shopify",
        "Business Plan",
        "Gestion de Projet",
    ],
    "Langues": [
        "Anglais Débutant",
        "Anglais Intermédiaire",
        "Anglais Avancé",
        "Français Débutant",
        "Français Intermédiaire",
        "Français Avancé",
        "Arabe Classique",
        "Darija Marocain",
        "Espagnol",
        "Allemand",
        "Chinois",
    ],
    "Droit & Consultation": [
        "Droit des Affaires",
        "Droit Immobilier",
        "Droit du Travail",
        "Consultation Juridique",
        "Conseil Fiscal",
    ],
    "Autres Compétences": [
        "Excel Avancé",
        "PowerPoint",
        "Comptabilité",
        "Gestion RH",
        "Coaching Personnel",
        "Développement Personnel",
        "Préparation Entretien",
    ],
}

ALL_SKILLS = [skill for skills in SKILLS_CATEGORIES.values() for skill in skills]

MOROCCAN_CITIES = [
    "Casablanca",
    "Rabat",
    "Marrakech",
    "Fès",
    "Tanger",
    "Agadir",
    "Meknès",
    "Oujda",
    "Kenitra",
    "Tetouan",
    "Safi",
    "Temara",
    "Mohammedia",
    "Khouribga",
    "El Jadida",
    "Beni Mellal",
    "Nador",
]

EDUCATION_LEVELS = ["Collège", "Lycée", "Bac", "Bac+1", "Bac+2", "Bac+3", "Bac+4", "Bac+5", "Bac+8"]
