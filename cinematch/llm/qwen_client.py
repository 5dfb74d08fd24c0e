import torch
from transformers import AutoModelForCausalLM, AutoTokenizer
from typing import Optional
from dotenv import load_dotenv
from cinematch.utils.config import CONFIG_PATH, load_config
from cinematch.utils.logger import get_logger

logger = get_logger(__name__)

load_dotenv()


class QwenClient:
    """Local oracle backed by a Qwen chat model; the JSON shape is requested through the prompt."""

    def __init__(self, config_path: str = CONFIG_PATH):
        self.config = load_config(config_path)

        self.llm_config = self.config["oracle"]["qwen"]
        self.model_name = self.llm_config["model_name"]
        self.device = self.llm_config["device"]
        self.max_new_tokens = self.llm_config["max_new_tokens"]
        self.temperature = self.llm_config["temperature"]
        self.top_p = self.llm_config["top_p"]

        logger.info(f"Loading LLM: {self.model_name} on {self.device}...")
        self.tokenizer = AutoTokenizer.from_pretrained(self.model_name, trust_remote_code=True)
        self.model = AutoModelForCausalLM.from_pretrained(
            self.model_name,
            device_map=self.device,
            trust_remote_code=True,
            torch_dtype=torch.float16
        )
        self.model.eval()
        logger.info("LLM loaded.")

    def generate(
        self,
        prompt: str,
        response_schema: Optional[dict] = None,
        system_prompt: str = "You are a helpful assistant that outputs JSON.",
    ) -> str:
        # response_schema is not used here: the local model only sees the JSON
        # shape spelled out in the prompt, and the reply is validated afterwards.
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt}
        ]

        text = self.tokenizer.apply_chat_template(
            messages,
            tokenize=False,
            add_generation_prompt=True
        )

        model_inputs = self.tokenizer([text], return_tensors="pt").to(self.model.device)

        with torch.no_grad():
            generated_ids = self.model.generate(
                model_inputs.input_ids,
                attention_mask=model_inputs.attention_mask,
                max_new_tokens=self.max_new_tokens,
                temperature=self.temperature,
                top_p=self.top_p,
                do_sample=True
            )

        generated_ids = [
            output_ids[len(input_ids):] for input_ids, output_ids in zip(model_inputs.input_ids, generated_ids)
        ]

        return self.tokenizer.batch_decode(generated_ids, skip_special_tokens=True)[0]


if __name__ == "__main__":
    client = QwenClient()
    response = client.generate('Reply with {"hello": "world"} as JSON.')
    logger.info(f"Response: {response}")
