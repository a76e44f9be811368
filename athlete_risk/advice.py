"""
Body-part specific advice.

Region-level recommendation tables keyed by risk level. Left and right sides
share a region; titles and text may reference the part with `{part}`.
"""

from typing import Dict, List, Optional, Tuple

from athlete_risk.risk import RiskScorer
from athlete_risk.schemas import Recommendation, RecommendationPriority, RiskLevel

H = RecommendationPriority.HIGH
M = RecommendationPriority.MEDIUM
L = RecommendationPriority.LOW

AdviceTable = Dict[RiskLevel, List[Tuple[RecommendationPriority, str, str]]]


# ============================================================================
# Region Advice Tables
# ============================================================================

SHOULDER_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "Immediate Rest for {part}",
         "Stop all overhead movements, pressing and throwing immediately. Ice for 15-20 minutes every 2-3 hours."),
        (H, "Medical Evaluation Required",
         "See a sports medicine specialist. Possible rotator cuff strain or impingement."),
    ],
    RiskLevel.HIGH: [
        (H, "Reduce Overhead Activity",
         "Eliminate overhead pressing, swimming and throwing for 48-72 hours. Focus on scapular stabilization."),
        (M, "Rotator Cuff Protection",
         "Perform doorway stretches, shoulder blade squeezes and band pull-aparts. Ice after any activity."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Modify Shoulder Training",
         "Reduce pressing weight by 30% and add extra warm-up sets with resistance bands."),
        (L, "Preventive Stretching",
         "Sleeper stretch and cross-body stretch 2-3x daily. Heat before training, ice after."),
    ],
    RiskLevel.LOW: [
        (L, "Maintain Shoulder Health",
         "Keep band work and dynamic stretching in the warm-up. Monitor form on pressing movements."),
    ],
    RiskLevel.MINIMAL: [
        (L, "Optimal {part} Condition",
         "Shoulder is well-recovered. Consider 1-2 sets of rotator cuff strengthening weekly."),
    ],
}

LEG_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "Stop All Lower Body Training",
         "No running, jumping, squatting or lunging. Possible hamstring or quadriceps strain. Rest and elevate."),
        (H, "Ice and Medical Assessment",
         "Ice 20 minutes every 2 hours and see a sports medicine professional within 24 hours."),
    ],
    RiskLevel.HIGH: [
        (H, "Reduce Leg Training Volume",
         "Cut running distance by 50% and skip sprints. No heavy squats or deadlifts for 3-4 days."),
        (M, "Hamstring and Quad Protection",
         "Dynamic leg swings, foam rolling and eccentric hamstring work."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Modify Leg Workload",
         "Reduce squat and lunge weight by 20-25% and lengthen rest between sets."),
        (L, "Mobility and Recovery",
         "Daily foam rolling for quads, hamstrings and glutes. Add 90/90 hip stretches."),
    ],
    RiskLevel.LOW: [
        (L, "Monitor {part}",
         "Continue normal training with 10 minutes of dynamic stretching before leg sessions."),
    ],
    RiskLevel.MINIMAL: [
        (L, "Optimal {part} Condition",
         "Leg is fully recovered and ready for high-intensity training."),
    ],
}

FOOT_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "Cease Impact Activities",
         "Stop running, jumping and plyometrics. Possible ankle sprain or plantar fasciitis. Follow RICE."),
        (H, "Ankle Stabilization Required",
         "Wear an ankle brace and get an X-ray if pain or instability is severe."),
    ],
    RiskLevel.HIGH: [
        (H, "Reduce Impact Training",
         "Replace running with cycling or swimming for 5-7 days. No jumping or cutting movements."),
        (M, "Ankle Rehabilitation",
         "Ankle circles, calf raises and balance board work. Ice for 15 minutes after activity."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Modify Foot Loading",
         "Reduce running volume by 30% and check footwear cushioning."),
        (L, "Ankle Strengthening",
         "Resistance band dorsiflexion and eversion work plus daily single-leg balance holds."),
    ],
    RiskLevel.LOW: [
        (L, "Maintain Foot Health",
         "Keep warming up properly and watch for discomfort during impact work."),
    ],
    RiskLevel.MINIMAL: [
        (L, "Optimal {part} Condition",
         "Ankle and foot are stable. Consider proprioception training for prevention."),
    ],
}

ARM_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "Stop All Arm Training",
         "Cease pulling and pressing. Possible bicep tendon or elbow tendonitis. Ice the elbow and upper arm."),
        (H, "Elbow Protection Protocol",
         "Wear a compression sleeve and schedule an evaluation for tendon injury."),
    ],
    RiskLevel.HIGH: [
        (H, "Reduce Arm Volume",
         "Cut arm exercise weight and volume by 50%. No heavy curls or tricep work."),
        (M, "Elbow and Bicep Recovery",
         "Gentle wrist flexor and extensor stretches. Heat before training, ice after."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Modify Arm Training",
         "Reduce curl and tricep weight by 20% and use a slow 3-second eccentric."),
        (L, "Tendon Care",
         "Wrist roller and finger flexion work. Keep elbows in position when pressing."),
    ],
    RiskLevel.LOW: [
        (L, "Monitor Arm Training",
         "Continue normal arm training and avoid excessive volume."),
    ],
    RiskLevel.MINIMAL: [
        (L, "Optimal {part} Condition",
         "Arm is fully recovered and ready for progressive overload."),
    ],
}

HAND_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "Rest Wrist and Hand",
         "Stop gripping exercises and heavy lifting. Possible wrist sprain. Use a wrist splint at night."),
        (H, "Hand Therapy Required",
         "Ice the wrist and avoid repetitive hand movements until evaluated."),
    ],
    RiskLevel.HIGH: [
        (H, "Reduce Grip Activities",
         "Use straps for pulling work and skip heavy holds for several days."),
        (M, "Wrist Rehabilitation",
         "Gentle wrist circles and flexor stretches. Ice after training."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Modify Grip Training",
         "Reduce grip-intensive volume and alternate grip styles."),
        (L, "Wrist Strengthening",
         "Light wrist curls and rice-bucket work 2-3x per week."),
    ],
    RiskLevel.LOW: [
        (L, "Maintain Wrist Health",
         "Warm up wrists before pressing and gripping."),
    ],
    RiskLevel.MINIMAL: [
        (L, "Optimal {part} Condition",
         "Wrist and hand are pain-free. Continue current training."),
    ],
}

CORE_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "Stop Core Training",
         "Rest from abdominal work, heavy lifting and twisting. Possible abdominal strain or oblique tear."),
        (H, "Medical Evaluation Needed",
         "Rule out hernia or severe strain. Avoid bearing down. Rest 5-7 days minimum."),
    ],
    RiskLevel.HIGH: [
        (H, "Reduce Core Load",
         "No direct ab work or heavy compound lifts for 3-4 days. Use dead bugs and bird dogs."),
        (M, "Core Recovery Protocol",
         "Diaphragmatic breathing and gentle cat-cow stretches. Avoid rotation."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Modify Core Training",
         "Reduce ab volume by 40% and favor anti-rotation work such as the Pallof press."),
        (L, "Core Stability Work",
         "Planks, dead bugs and hollow holds. Brace properly during compound lifts."),
    ],
    RiskLevel.LOW: [
        (L, "Maintain Core Strength",
         "Continue balanced anti-extension and anti-rotation training."),
    ],
    RiskLevel.MINIMAL: [
        (L, "Optimal Core Condition",
         "Core is strong and stable and ready for progressive overload."),
    ],
}

CHEST_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "Stop All Pressing",
         "Cease bench press, push-ups and all chest work. Possible pectoral strain. Ice the chest."),
        (H, "Medical Assessment Required",
         "Get evaluated promptly. Pectoral tear risk if pain is sharp."),
    ],
    RiskLevel.HIGH: [
        (H, "Reduce Chest Training",
         "No barbell pressing for 5-7 days. Light dumbbell work only if pain-free."),
        (M, "Pectoral Recovery",
         "Doorway pec stretches and scapular retraction work. Ice after chest sessions."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Modify Pressing Volume",
         "Reduce pressing weight by 30% with controlled tempo."),
        (L, "Chest Maintenance",
         "Keep two pulls for every push and stretch pectorals twice daily."),
    ],
    RiskLevel.LOW: [
        (L, "Monitor Chest Training",
         "Continue normal chest training and avoid excessive frequency."),
    ],
    RiskLevel.MINIMAL: [
        (L, "Optimal Chest Condition",
         "Chest is recovered and strong."),
    ],
}

HEAD_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "URGENT: Seek Medical Attention",
         "Possible concussion or head injury. Stop all activity and watch for dizziness, nausea or confusion."),
        (H, "Concussion Protocol",
         "Complete rest. Return to play only after medical clearance."),
    ],
    RiskLevel.HIGH: [
        (H, "Stop All Training",
         "Cease physical activity until evaluated. Rest in a dark, quiet environment."),
        (M, "Monitor Symptoms",
         "Track headaches, vision changes and cognitive symptoms."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Reduce Training Intensity",
         "Lower training volume by 50% and avoid contact activities."),
        (L, "Medical Consultation",
         "Get evaluated if headaches persist. Prioritize hydration and sleep."),
    ],
    RiskLevel.LOW: [
        (L, "Monitor Head Health",
         "Use protective equipment and report any concerning symptoms."),
    ],
    RiskLevel.MINIMAL: [
        (L, "No Head Concerns",
         "No head injury risk detected. Continue safe training practices."),
    ],
}

NECK_ADVICE: AdviceTable = {
    RiskLevel.CRITICAL: [
        (H, "Stop All Neck Loading",
         "Rest from every exercise involving the neck. Possible cervical strain. Avoid sudden head movements."),
        (H, "Medical Evaluation Required",
         "Get evaluated before resuming loaded training."),
    ],
    RiskLevel.HIGH: [
        (H, "Reduce Neck Stress",
         "Skip shrugs, heavy carries and contact drills for several days."),
        (M, "Neck Rehabilitation",
         "Gentle range-of-motion work and chin tucks. Heat for muscle tension."),
    ],
    RiskLevel.MEDIUM: [
        (M, "Modify Neck Loading",
         "Reduce loaded neck work and keep a neutral spine when lifting."),
        (L, "Neck Maintenance",
         "Daily upper trapezius and levator stretches."),
    ],
    RiskLevel.LOW: [
        (L, "Maintain Neck Health",
         "Continue training with attention to posture."),
    ],
    RiskLevel.MINIMAL: [
        (L, "Optimal Neck Condition",
         "Neck is pain-free and mobile."),
    ],
}

REGION_ADVICE: Dict[str, AdviceTable] = {
    "shoulder": SHOULDER_ADVICE,
    "leg": LEG_ADVICE,
    "foot": FOOT_ADVICE,
    "arm": ARM_ADVICE,
    "hand": HAND_ADVICE,
    "abdomen": CORE_ADVICE,
    "chest": CHEST_ADVICE,
    "head": HEAD_ADVICE,
    "neck": NECK_ADVICE,
}


def format_body_part(body_part: str) -> str:
    """'right-shoulder' -> 'Right Shoulder'"""
    return " ".join(word.capitalize() for word in body_part.split("-"))


def region_of(body_part: str) -> Optional[str]:
    region = body_part.split("-")[-1]
    return region if region in REGION_ADVICE else None


class BodyPartAdvisor:
    """Turns a body part's risk percentage into region-specific advice."""

    def __init__(self, scorer: Optional[RiskScorer] = None):
        self.scorer = scorer or RiskScorer()

    def recommendations(self, body_part: str, risk_percentage: int) -> List[Recommendation]:
        """
        Advice for one body part at a risk percentage.

        Unknown body parts get a single generic recommendation.

        Args:
            body_part: Body part identifier (e.g., 'left-leg')
            risk_percentage: Current risk 0-100

        Returns:
            Recommendations in priority order
        """
        level = self.scorer.risk_level(risk_percentage)
        part_name = format_body_part(body_part)
        region = region_of(body_part)

        if region is None:
            priority = H if level in (RiskLevel.CRITICAL, RiskLevel.HIGH) else M
            return [Recommendation(
                priority=priority,
                title=f"{level.value.capitalize()} Risk Detected",
                description=f"Monitor {part_name} closely and adjust training accordingly.",
                body_parts=[body_part],
            )]

        return [
            Recommendation(
                priority=priority,
                title=title.format(part=part_name),
                description=description.format(part=part_name),
                body_parts=[body_part],
            )
            for priority, title, description in REGION_ADVICE[region][level]
        ]
