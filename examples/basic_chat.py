import asyncio

from openai import AsyncOpenAI

from weather_agent import ChatResponse, Conversation, create_llm, load_settings


async def chat_with_history():
    settings = load_settings()

    conversation = Conversation()
    conversation.append_system("You are an AIOps expert. Answer questions about AIOps as well as you can.")
    conversation.append_user("What is AIOps?")
    conversation.append_assistant(
        "AIOps combines AI with IT operations to help operators manage infrastructure."
    )
    conversation.append_user("What are its typical use cases?")

    async with create_llm(settings) as llm:
        response: ChatResponse = await llm.complete(conversation.snapshot())

    response.raise_for_error()
    print(response.content)


async def chat_pass_client():
    settings = load_settings()
    client = AsyncOpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        max_retries=3,
        timeout=10,
    )

    async with create_llm(settings, client=client) as llm:
        response = await llm.complete(
            [{"role": "user", "content": "What's your name?"}],
            params={"temperature": 0.7, "max_tokens": 1000},
        )

    if response.is_error:
        print("Request failed:", response.error)
    else:
        print(response.content)
        print("Usage:", response.raw.usage)


if __name__ == "__main__":
    asyncio.run(chat_with_history())
    asyncio.run(chat_pass_client())
